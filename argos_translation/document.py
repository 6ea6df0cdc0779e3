"""
Standalone string document.

A minimal stand-in for a host program: string data units keyed by address,
each carrying the same translation annotation a disassembler keeps on defined
strings (translated value plus a show-translated flag), and numbered
transactions that either commit or roll the annotations back.

On disk a document is JSON:

    {
      "name": "firmware.bin",
      "strings": [
        {"address": "0x401000", "value": "안녕하세요"},
        {"address": "0x401010", "value": null}
      ]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field

from .errors import TransactionError

logger = logging.getLogger(__name__)


class StringDataModel(BaseModel):
    address: str = Field(min_length=1)
    value: Optional[str] = None
    translated_value: Optional[str] = None
    show_translated: bool = False


class StringDocumentModel(BaseModel):
    name: str = "untitled"
    strings: list[StringDataModel] = Field(default_factory=list)


class StringData:
    def __init__(
        self,
        document: "StringDocument",
        address: str,
        value: Optional[str],
        translated_value: Optional[str] = None,
        show_translated: bool = False,
    ) -> None:
        self._document = document
        self.address = address
        self._value = value
        self._translated_value = translated_value
        self._show_translated = show_translated

    @property
    def string_value(self) -> Optional[str]:
        return self._value

    @property
    def translated_value(self) -> Optional[str]:
        return self._translated_value

    @property
    def show_translated(self) -> bool:
        return self._show_translated

    def set_translated_value(self, value: Optional[str]) -> None:
        self._document.check_writable()
        self._translated_value = value

    def set_show_translated(self, show: bool) -> None:
        self._document.check_writable()
        self._show_translated = bool(show)

    def to_model(self) -> StringDataModel:
        return StringDataModel(
            address=self.address,
            value=self._value,
            translated_value=self._translated_value,
            show_translated=self._show_translated,
        )

    def __repr__(self) -> str:
        return f"StringData({self.address!r}, {self._value!r})"


class StringDocument:
    def __init__(self, name: str = "untitled") -> None:
        self.name = name
        self._strings: dict[str, StringData] = {}
        self._next_transaction_id = 1
        self._open_transaction: Optional[tuple[int, str, dict[str, tuple[Optional[str], bool]]]] = None
        self.committed: list[str] = []
        self.rolled_back: list[str] = []

    @classmethod
    def from_model(cls, model: StringDocumentModel) -> "StringDocument":
        document = cls(name=model.name)
        for item in model.strings:
            document.add_string(
                item.address,
                item.value,
                translated_value=item.translated_value,
                show_translated=item.show_translated,
            )
        return document

    @classmethod
    def load(cls, path: Path) -> "StringDocument":
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.from_model(StringDocumentModel.model_validate(raw))

    def to_model(self) -> StringDocumentModel:
        return StringDocumentModel(name=self.name, strings=[data.to_model() for data in self._strings.values()])

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = self.to_model().model_dump()
        path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    def add_string(
        self,
        address: str,
        value: Optional[str],
        *,
        translated_value: Optional[str] = None,
        show_translated: bool = False,
    ) -> StringData:
        if address in self._strings:
            raise ValueError(f"Duplicate string address: {address}")
        data = StringData(self, address, value, translated_value, show_translated)
        self._strings[address] = data
        return data

    @property
    def addresses(self) -> list[str]:
        return list(self._strings)

    def strings(self) -> Iterable[StringData]:
        return list(self._strings.values())

    def get_data_at(self, location: Any) -> Optional[StringData]:
        address = getattr(location, "address", location)
        return self._strings.get(str(address))

    @property
    def in_transaction(self) -> bool:
        return self._open_transaction is not None

    def check_writable(self) -> None:
        if self._open_transaction is None:
            raise TransactionError(f"Document {self.name!r} modified outside a transaction")

    def start_transaction(self, label: str) -> int:
        if self._open_transaction is not None:
            raise TransactionError(
                f"Transaction {self._open_transaction[1]!r} is still open on {self.name!r}"
            )
        transaction_id = self._next_transaction_id
        self._next_transaction_id += 1
        saved = {
            address: (data.translated_value, data.show_translated)
            for address, data in self._strings.items()
        }
        self._open_transaction = (transaction_id, label, saved)
        logger.debug("Transaction %s started: %s", transaction_id, label)
        return transaction_id

    def end_transaction(self, transaction_id: int, commit: bool) -> None:
        if self._open_transaction is None or self._open_transaction[0] != transaction_id:
            raise TransactionError(f"Transaction {transaction_id} is not open on {self.name!r}")
        _, label, saved = self._open_transaction
        self._open_transaction = None
        if commit:
            self.committed.append(label)
            logger.debug("Transaction %s committed: %s", transaction_id, label)
            return

        for address, (translated_value, show_translated) in saved.items():
            data = self._strings[address]
            data._translated_value = translated_value
            data._show_translated = show_translated
        self.rolled_back.append(label)
        logger.debug("Transaction %s rolled back: %s", transaction_id, label)


__all__ = ["StringData", "StringDataModel", "StringDocument", "StringDocumentModel"]
