import re
from dataclasses import dataclass, fields
from typing import Any, Dict, Iterable, Mapping, Optional

PARTIAL_FIELDS = ("name", "symbol", "image")


def clean_text(value: Any) -> Optional[str]:
    """Strip strings; anything blank or non-string becomes None."""
    if not isinstance(value, str):
        return None
    value = value.replace("\x00", "").strip()
    return value or None


def slugify(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


@dataclass
class PartialTokenRecord:
    """Whatever subset of name/symbol/image one source knows about a token."""
    name: Optional[str] = None
    symbol: Optional[str] = None
    image: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PartialTokenRecord":
        data = data or {}
        return cls(
            name=clean_text(data.get("name")),
            symbol=clean_text(data.get("symbol")),
            image=clean_text(data.get("image")),
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def is_empty(self) -> bool:
        return all(getattr(self, f) is None for f in PARTIAL_FIELDS)

    def merge(self, other: Optional["PartialTokenRecord"], only: Iterable[str] = PARTIAL_FIELDS) -> None:
        """Fill fields that are still None from other; set fields are never replaced."""
        if other is None:
            return
        for name in only:
            if getattr(self, name) is None:
                setattr(self, name, getattr(other, name))


@dataclass(frozen=True)
class TokenRecord:
    id: str
    symbol: Optional[str]
    name: Optional[str]
    image: Optional[str]
    contract_address: str

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "image": self.image,
            "contractAddress": self.contract_address,
        }


def token_id(name: Optional[str], symbol: Optional[str], address: str) -> str:
    if name:
        return slugify(name)
    if symbol:
        return symbol.lower()
    return address.lower()


def format_token_record(record: PartialTokenRecord, address: str) -> TokenRecord:
    """
    Build the emitted record from merged source data.

    id prefers the slugified name, then the lowercased symbol, then the
    lowercased address. A missing name falls back to the uppercased symbol.
    """
    symbol = record.symbol
    return TokenRecord(
        id=token_id(record.name, symbol, address),
        symbol=symbol.lower() if symbol else None,
        name=record.name or (symbol.upper() if symbol else None),
        image=record.image,
        contract_address=address,
    )
