"""
Blog post test data factory
Generates reproducible posts from an injected seed
"""

import random
from typing import Any, Dict, List, Optional
from faker import Faker

TITLES = [
    "My first post",
    "3 things to be cool",
    "YouTube is no bueno",
    "Memes for kids",
    "idkmybffjill",
]

CONTENT = (
    "Lorem ipsum dolor sit amet, natum mollis mediocritatem eam cu. Utamur tacimates cu mei, "
    "at posse luptatum usu, cu ludus ancillae postulant qui. Duo accumsan atomorum comprehensam in? "
    "Id qui illum malis appareat, pro nulla mentitum molestiae an."
)


class BlogPostFactory:
    """Seeded generator for post payloads"""

    def __init__(self, seed: int, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)

    def generate_title(self) -> str:
        return self.rng.choice(TITLES)

    def generate_author(self) -> Dict[str, str]:
        return {
            "firstName": self.fake.first_name(),
            "lastName": self.fake.last_name(),
        }

    def generate_post(self, **overrides) -> Dict[str, Any]:
        data = {
            "author": self.generate_author(),
            "title": self.generate_title(),
            "content": CONTENT,
        }
        data.update(overrides)
        return data

    def generate_posts(self, count: int) -> List[Dict[str, Any]]:
        return [self.generate_post() for _ in range(count)]
