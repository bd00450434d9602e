"""Deck loader: YAML serialization and deserialization for DeckSpec.

A deck file describes a whole presentation as data so it can be reviewed,
version-controlled and rebuilt with ``pptx-export build``. Relative picture
paths are resolved against the directory of the deck file.
"""

from pathlib import Path

import yaml

from pptx_export.errors import PackageNotFound, ValidationError
from .models import DeckSpec, Picture


def save_deck(deck: DeckSpec, path: str | Path) -> None:
    """Serialize a DeckSpec to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = deck.to_dict()
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False,
                  allow_unicode=True, width=120)


def load_deck(path: str | Path) -> DeckSpec:
    """Deserialize a DeckSpec from a YAML file."""
    path = Path(path)
    if not path.is_file():
        raise PackageNotFound(f"Deck file not found: {path}")
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValidationError(f"Deck file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ValidationError(f"Deck file {path} must contain a mapping at the top level")

    deck = DeckSpec.from_dict(data)
    for slide in deck.slides:
        for shape in slide.shapes:
            if isinstance(shape, Picture) and not isinstance(shape.image, bytes):
                image = Path(shape.image)
                shape.image = image if image.is_absolute() else path.parent / image
    return deck
