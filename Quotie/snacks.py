"""
Snack library: curated famous quotes users can add to their collection
with one tap. Added snacks go through the normal add flow, so they feed
Memmi like any other quote.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class SnackSource(Enum):
    BOOKS = "Books"
    SONGS = "Songs"
    MOVIES = "Movies"
    PODCASTS = "Podcasts"


@dataclass(frozen=True)
class SnackQuote:
    text: str
    author: str
    origin: str
    source: SnackSource


def _snacks(source: SnackSource, rows: List[Tuple[str, str, str]]) -> List[SnackQuote]:
    return [SnackQuote(text, author, origin, source) for text, author, origin in rows]


SNACK_LIBRARY: Tuple[SnackQuote, ...] = tuple(
    _snacks(SnackSource.BOOKS, [
        ("Broken things can still be beautiful.", "Ernest Hemingway", "The Sun Also Rises"),
        ("Grief is love with nowhere to go.", "Jamie Anderson", "What Surviving the Loss of a Loved One Taught Me"),
        ("We accept the love we think we deserve.", "Stephen Chbosky", "The Perks of Being a Wallflower"),
        ("There is no greater agony than bearing an untold story.", "Maya Angelou", "I Know Why the Caged Bird Sings"),
        ("You do not have to be good.", "Mary Oliver", "Wild Geese"),
        ("We are all just walking each other home.", "Ram Dass", "Be Here Now"),
        ("Hope is a thing with feathers.", "Emily Dickinson", "Collected Poems"),
        ("Kindness is never wasted.", "Aesop", "Fables"),
    ])
    + _snacks(SnackSource.SONGS, [
        ("There is a crack in everything, that’s how the light gets in.", "Leonard Cohen", "Anthem"),
        ("You’re gonna be alright.", "Lizzo", "Good as Hell"),
        ("You don’t have to be alone.", "Coldplay", "Fix You"),
        ("This is me trying.", "Taylor Swift", "This Is Me Trying"),
        ("You’re still standing.", "Elton John", "I’m Still Standing"),
        ("It’s okay not to be okay.", "Logic", "1-800-273-8255"),
        ("I’m learning to let go.", "Kacey Musgraves", "Slow Burn"),
        ("This pain will be useful.", "Sufjan Stevens", "Should Have Known Better"),
    ])
    + _snacks(SnackSource.MOVIES, [
        ("It’s not your fault.", "Sean Maguire", "Good Will Hunting"),
        ("The smallest person can change the course of the future.", "Galadriel", "The Lord of the Rings"),
        ("Just keep swimming.", "Dory", "Finding Nemo"),
        ("Hope is a good thing.", "Andy Dufresne", "The Shawshank Redemption"),
        ("Life moves pretty fast.", "Ferris Bueller", "Ferris Bueller’s Day Off"),
        ("You are who you choose to be.", "The Iron Giant", "The Iron Giant"),
        ("Your mistakes don’t define you.", "Po", "Kung Fu Panda"),
        ("We keep going.", "Rocky Balboa", "Rocky"),
    ])
    + _snacks(SnackSource.PODCASTS, [
        ("Vulnerability is not weakness.", "Brené Brown", "Unlocking Us"),
        ("You’re not behind — you’re learning.", "Jay Shetty", "On Purpose"),
        ("You don’t have to hustle for worth.", "Glennon Doyle", "We Can Do Hard Things"),
        ("Feelings are data.", "Esther Perel", "Where Should We Begin?"),
        ("Rest is resistance.", "Tricia Hersey", "The Nap Ministry Podcast"),
        ("Curiosity is kindness.", "Krista Tippett", "On Being"),
        ("You are not broken.", "Dr. Laurie Santos", "The Happiness Lab"),
    ])
)

RECOMMENDED_COUNT = 10


def by_source(source: Optional[SnackSource] = None) -> List[SnackQuote]:
    if source is None:
        return list(SNACK_LIBRARY)
    return [s for s in SNACK_LIBRARY if s.source is source]


def recommended(count: int = RECOMMENDED_COUNT, rng: Optional[random.Random] = None) -> List[SnackQuote]:
    """A shuffled sample of the library."""
    rng = rng or random.Random()
    count = max(0, min(count, len(SNACK_LIBRARY)))
    return rng.sample(list(SNACK_LIBRARY), count)
