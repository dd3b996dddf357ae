"""The daily supplement protocol and checklist progress."""

from collections.abc import Iterable
from datetime import date

from .models import DailySupplementTracking
from .schemas import (
    ChecklistItem,
    ChecklistSlot,
    ProtocolSupplement,
    SlotProgress,
    SupplementChecklist,
    SupplementSlot,
)


def _slot(slot_name: str, display_name: str, *supplements: tuple) -> SupplementSlot:
    return SupplementSlot(
        slot_name=slot_name,
        display_name=display_name,
        supplements=[
            ProtocolSupplement(name=name, dosage=dosage, optional=optional)
            for name, dosage, optional in supplements
        ],
    )


SUPPLEMENT_PROTOCOL: list[SupplementSlot] = [
    _slot(
        "nuechtern",
        "Morgens nüchtern",
        ("Athlete Stack Men", "5 Scoops Powder", False),
        ("Glutamin", "10-20g", False),
        ("Vitamin C Drink", "1 Messlöffel", False),
    ),
    _slot(
        "mahlzeit_1",
        "Zur 1. Mahlzeit",
        ("Vitamin D3 K2", "1 Kapsel", False),
        ("Curcumin", "1 Kapsel", False),
        ("Q10+", "1 Kapsel", False),
        ("Kreatin", "8 Gramm", False),
        ("Digestive Enzyme+", "1 Kapsel", False),
    ),
    _slot("pre_workout", "Pre-Workout", ("Crank", "1 Portion", False)),
    _slot("intra_workout", "Intra-Workout", ("Elite Aminos", "2 Scoops", False)),
    _slot(
        "post_workout",
        "Post-Training",
        ("Designer-Whey / Clear-Whey", "1 Portion", False),
    ),
    _slot(
        "nach_mahlzeiten",
        "Nach den Mahlzeiten",
        ("Digestive Enzyme+", "1 Kapsel", True),
        ("Magnesium Complex", "1 Kapsel", False),
        ("Collagen Peptides", "1 Portion", True),
    ),
    _slot(
        "letzte_mahlzeit",
        "Nach der letzten Mahlzeit",
        ("Curcumin", "1 Kapsel", False),
        ("Omega 3", "6 Kapseln", False),
        ("Ashwa+", "1 Kapsel", False),
        ("Zink", "1/2 Tablette", False),
        ("Q10+", "1 Kapsel", False),
        ("Digestive Enzyme+", "1 Kapsel", True),
    ),
    _slot("vor_schlafen", "Vor dem Schlafen", ("ESN Sleep", "4 Scoops", False)),
]


def find_slot(slot_name: str) -> SupplementSlot | None:
    for slot in SUPPLEMENT_PROTOCOL:
        if slot.slot_name == slot_name:
            return slot
    return None


def progress_of(items: Iterable[ChecklistItem]) -> SlotProgress:
    """Count required items; the percentage is rounded half up."""
    required = [item for item in items if not item.optional]
    completed = sum(1 for item in required if item.taken)
    total = len(required)
    percent = int(completed / total * 100 + 0.5) if total else 0
    return SlotProgress(completed=completed, total=total, percent=percent)


def build_checklist(
    day: date, entries: Iterable[DailySupplementTracking]
) -> SupplementChecklist:
    """Lay the day's tracking rows over the protocol.

    Rows for supplements no longer in the protocol are left out; a slot's
    notes come from any of its rows.
    """
    by_key = {(e.slot_name, e.supplement_name): e for e in entries}

    slots = []
    all_items = []
    for slot in SUPPLEMENT_PROTOCOL:
        items = []
        notes = None
        for supplement in slot.supplements:
            entry = by_key.get((slot.slot_name, supplement.name))
            if entry is not None and entry.notes and notes is None:
                notes = entry.notes
            items.append(
                ChecklistItem(
                    **supplement.model_dump(), taken=bool(entry and entry.taken)
                )
            )
        all_items.extend(items)
        slots.append(
            ChecklistSlot(
                slot_name=slot.slot_name,
                display_name=slot.display_name,
                items=items,
                notes=notes,
                progress=progress_of(items),
            )
        )

    return SupplementChecklist(date=day, slots=slots, progress=progress_of(all_items))
