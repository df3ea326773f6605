# accounting/services/requests.py

"""
VOUCHER ENGINE REQUESTS

Immutable inputs for accounting.services.voucher_engine.

dl_id is a real optional (int | None): None means "no detail ledger".
Shape is not validated here; the engine owns every check so that the
error reported for a given input is deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Tuple


@dataclass(frozen=True)
class VoucherLineInput:
    sl_id: int
    debit: int
    credit: int
    dl_id: int | None = None


@dataclass(frozen=True)
class VoucherLineUpdate:
    """New values for an existing line, addressed by line_id."""

    line_id: int
    sl_id: int
    debit: int
    credit: int
    dl_id: int | None = None

    def as_input(self) -> VoucherLineInput:
        return VoucherLineInput(
            sl_id=self.sl_id,
            dl_id=self.dl_id,
            debit=self.debit,
            credit=self.credit,
        )


@dataclass(frozen=True)
class VoucherCreateRequest:
    number: str
    lines: Tuple[VoucherLineInput, ...]

    @staticmethod
    def build(*, number: str, lines: Iterable[VoucherLineInput]) -> "VoucherCreateRequest":
        return VoucherCreateRequest(number=number, lines=tuple(lines))


@dataclass(frozen=True)
class VoucherLinesDelta:
    """
    Three-way change set against the persisted lines of one voucher.

    - inserted: brand new lines
    - updated: replacement values for existing lines
    - deleted: ids of existing lines to remove
    """

    inserted: Tuple[VoucherLineInput, ...] = ()
    updated: Tuple[VoucherLineUpdate, ...] = ()
    deleted: Tuple[int, ...] = ()

    @staticmethod
    def build(
        *,
        inserted: Iterable[VoucherLineInput] = (),
        updated: Iterable[VoucherLineUpdate] = (),
        deleted: Iterable[int] = (),
    ) -> "VoucherLinesDelta":
        return VoucherLinesDelta(
            inserted=tuple(inserted),
            updated=tuple(updated),
            deleted=tuple(deleted),
        )

    @property
    def count_change(self) -> int:
        return len(self.inserted) - len(self.deleted)


@dataclass(frozen=True)
class VoucherUpdateRequest:
    voucher_id: int
    version: int
    number: str
    lines: VoucherLinesDelta = field(default_factory=VoucherLinesDelta)


@dataclass(frozen=True)
class VoucherDeleteRequest:
    voucher_id: int
    version: int


@dataclass(frozen=True)
class VoucherGetRequest:
    voucher_id: int
