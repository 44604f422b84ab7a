"""
Dish records shared by the extractor, the matcher and the host service
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from menu_benchmark.utils import parse_price


def _text(value) -> str:
    """Coerce an optional value to a stripped string"""
    if value is None:
        return ""
    return str(value).strip()


def _pick(data: Mapping, *keys):
    """Return the first key present in data (camelCase or snake_case)"""
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass(frozen=True)
class ReferenceItem:
    """One of our own catalog dishes, used as ground truth for matching"""
    id: str
    brand: str = ""
    category: str = ""
    name: str = ""
    description: str = ""
    full_price: Optional[float] = None
    promo_price: Optional[float] = None
    image: str = ""
    discount: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> "ReferenceItem":
        """Build from a loosely typed record (API body, CSV row, stored JSON)"""
        return cls(
            id=_text(data.get('id')),
            brand=_text(data.get('brand')),
            category=_text(data.get('category')),
            name=_text(data.get('name')),
            description=_text(data.get('description')),
            full_price=parse_price(_pick(data, 'fullPrice', 'full_price')),
            promo_price=parse_price(_pick(data, 'promoPrice', 'promo_price')),
            image=_text(data.get('image')),
            discount=parse_price(data.get('discount')),
        )

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'brand': self.brand,
            'category': self.category,
            'name': self.name,
            'description': self.description,
            'image': self.image,
            'fullPrice': self.full_price,
            'promoPrice': self.promo_price,
            'discount': self.discount,
        }


@dataclass(frozen=True)
class CandidateItem:
    """A dish mined from a competitor page"""
    name: str = ""
    description: str = ""
    full_price: Optional[float] = None
    promo_price: Optional[float] = None
    image: str = ""

    @classmethod
    def from_dict(cls, data: Mapping) -> "CandidateItem":
        return cls(
            name=_text(data.get('name')),
            description=_text(data.get('description')),
            full_price=parse_price(_pick(data, 'fullPrice', 'full_price')),
            promo_price=parse_price(_pick(data, 'promoPrice', 'promo_price')),
            image=_text(data.get('image')),
        )

    def to_dict(self) -> Dict:
        return {
            'name': self.name,
            'description': self.description,
            'fullPrice': self.full_price,
            'promoPrice': self.promo_price,
            'image': self.image,
        }
