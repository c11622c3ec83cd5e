"""GEDCOM parsing into pedigree chart input records."""

from pathlib import Path

from ged4py import GedcomReader

from models import PARENT_CHILD, SPOUSE, Person, Relationship


def extract_person_id(xref_id: str) -> str:
    """Strip the @ delimiters from a GEDCOM xref_id like '@I_347421849@'."""
    person_id = xref_id.strip().strip("@")
    if not person_id:
        raise ValueError(f"Empty xref_id: {xref_id!r}")
    return person_id


def parse_gedcom(filepath: Path) -> GedcomReader:
    """Parse a GEDCOM file and return the reader object."""
    return GedcomReader(str(filepath))


def extract_name_parts(indi) -> tuple[str | None, str | None]:
    """Extract given names and surnames from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return (None, None)

    name_value = name_rec.value

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_value, tuple):
        given, surname = name_value[0], name_value[1]
        return (given or None, surname or None)

    givn = name_rec.sub_tag("GIVN")
    surn = name_rec.sub_tag("SURN")
    given = givn.value if givn else str(name_value).split("/")[0].strip()
    return (given or None, surn.value if surn else None)


def extract_photo(indi) -> str | None:
    """Return the file of the first multimedia link of a record, if any."""
    file_rec = indi.sub_tag("OBJE/FILE")
    if file_rec is None or not file_rec.value:
        return None
    return str(file_rec.value)


def normalize_data(reader: GedcomReader) -> tuple[list[Person], list[Relationship]]:
    """
    Extract people and relationships from parsed GEDCOM data.

    Each FAM record yields a spouse relationship between HUSB and WIFE
    (status "divorced" when the family has a DIV record) and one parent_child
    relationship from every recorded parent to every CHIL.
    """
    people: list[Person] = []
    relationships: list[Relationship] = []

    for rec in reader.records0("INDI"):
        if rec.xref_id is None:
            continue

        given_names, surnames = extract_name_parts(rec)
        people.append(
            Person(
                id=extract_person_id(rec.xref_id),
                given_names=given_names,
                surnames=surnames,
                is_living=rec.sub_tag("DEAT") is None,
                profile_photo=extract_photo(rec),
            )
        )

    for rec in reader.records0("FAM"):
        if rec.xref_id is None:
            continue
        fam_id = extract_person_id(rec.xref_id)

        parent_ids = []
        for tag in ("HUSB", "WIFE"):
            parent = rec.sub_tag(tag)
            if parent is not None and parent.xref_id:
                parent_ids.append(extract_person_id(parent.xref_id))

        if len(parent_ids) == 2:
            relationships.append(
                Relationship(
                    id=f"{fam_id}-spouse",
                    type=SPOUSE,
                    person_id1=parent_ids[0],
                    person_id2=parent_ids[1],
                    status="divorced" if rec.sub_tag("DIV") is not None else None,
                )
            )

        for child in rec.sub_tags("CHIL"):
            if not child.xref_id:
                continue
            child_id = extract_person_id(child.xref_id)
            for parent_id in parent_ids:
                relationships.append(
                    Relationship(
                        id=f"{fam_id}-{parent_id}-{child_id}",
                        type=PARENT_CHILD,
                        person_id1=parent_id,
                        person_id2=child_id,
                    )
                )

    return people, relationships


def load_gedcom(filepath: Path) -> tuple[list[Person], list[Relationship]]:
    """Read a GEDCOM file into people and relationships."""
    with parse_gedcom(filepath) as reader:
        return normalize_data(reader)
