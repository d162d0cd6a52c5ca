"""Built-in sample quotes shown when nothing has been saved yet."""

from typing import List

from .models import FontStyle, PastelStyle, Quote


def sample_quotes() -> List[Quote]:
    """Return a fresh copy of the three sample quotes (new ids each call)."""
    return [
        Quote.create(
            text="You don’t have to feel ready to start, you just have to start.",
            author="S.C. Says",
            source="Keynote",
            is_favorite=True,
            color_style=PastelStyle.PEACH,
            font_style=FontStyle.ROUNDED,
        ),
        Quote.create(
            text="Be kind, for everyone you meet is fighting a hard battle.",
            author="Ian Maclaren (attributed)",
            source="Conversation",
            color_style=PastelStyle.LILAC,
            font_style=FontStyle.SERIF,
        ),
        Quote.create(
            text="Attention is the rarest and purest form of generosity.",
            author="Simone Weil",
            source="Book",
            color_style=PastelStyle.SKY,
            font_style=FontStyle.STANDARD,
        ),
    ]
