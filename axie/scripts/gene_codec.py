"""Axie gene decoding: 256-bit hex payload to class, cosmetics and part alleles.

The decoder is an interpreter over fixed layout tables. Bit 0 is the most
significant bit of the first hex digit; every field offset is constant and
never depends on the payload.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

GENE_HEX_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")
GENE_HEX_DIGITS = 64
GENE_BITS = GENE_HEX_DIGITS * 4

# Only 9 of the 16 possible 4-bit patterns are assigned.
CLASS_CODES: Mapping[str, str] = MappingProxyType(
    {
        "0000": "beast",
        "0001": "bug",
        "0010": "bird",
        "0011": "plant",
        "0100": "aquatic",
        "0101": "reptile",
        "1000": "mech",
        "1001": "dawn",
        "1010": "dusk",
    }
)
DEFAULT_CLASS = "beast"
UNKNOWN_PART_CLASS = "unknown"

# Display order vs. the order parts are packed into the payload.
PART_ORDER = ("eyes", "ears", "mouth", "horn", "back", "tail")
GENE_PART_ORDER = ("eyes", "mouth", "ears", "horn", "back", "tail")
ALLELE_SLOTS = ("dominant", "recessive1", "recessive2")

PARTS_START_BIT = 64
ALLELE_BITS = 12
PART_BITS = len(ALLELE_SLOTS) * ALLELE_BITS


class InvalidGeneFormat(ValueError):
    """Raised when a gene payload is not 64 hex digits (optionally 0x-prefixed)."""


@dataclass(frozen=True)
class GeneField:
    name: str
    start: int
    width: int

    @property
    def end(self) -> int:
        return self.start + self.width

    def slice(self, bits: str) -> str:
        return bits[self.start : self.end]

    def read(self, bits: str) -> int:
        return int(self.slice(bits), 2)


HEADER_LAYOUT: tuple[GeneField, ...] = (
    GeneField("class", 0, 4),
    GeneField("region", 4, 5),
    GeneField("tag", 9, 4),
    GeneField("body_skin", 13, 4),
    GeneField("pattern.dominant", 17, 6),
    GeneField("pattern.recessive1", 23, 6),
    GeneField("pattern.recessive2", 29, 6),
    GeneField("color.dominant", 35, 6),
    GeneField("color.recessive1", 41, 6),
    GeneField("color.recessive2", 47, 6),
)

# Offsets relative to a 12-bit allele window; the last 2 bits carry nothing.
ALLELE_LAYOUT: tuple[GeneField, ...] = (
    GeneField("class", 0, 4),
    GeneField("part_id", 4, 6),
)


def _build_part_layout() -> tuple[GeneField, ...]:
    fields: list[GeneField] = []
    for part_index, part in enumerate(GENE_PART_ORDER):
        part_start = PARTS_START_BIT + part_index * PART_BITS
        for slot_index, slot in enumerate(ALLELE_SLOTS):
            fields.append(GeneField(f"{part}.{slot}", part_start + slot_index * ALLELE_BITS, ALLELE_BITS))
    return tuple(fields)


PART_LAYOUT = _build_part_layout()


@dataclass(frozen=True)
class TraitTriple:
    dominant: str
    recessive1: str
    recessive2: str

    def to_dict(self) -> dict[str, str]:
        return {"dominant": self.dominant, "recessive1": self.recessive1, "recessive2": self.recessive2}


@dataclass(frozen=True)
class PartAllele:
    part_class: str
    part_id: str

    @property
    def name(self) -> str:
        return f"part-{self.part_id}"

    @property
    def key(self) -> str:
        return f"{self.part_class}-{self.part_id}"

    def to_dict(self) -> dict[str, str]:
        return {"part_class": self.part_class, "part_id": self.part_id, "name": self.name}


@dataclass(frozen=True)
class PartGene:
    dominant: PartAllele
    recessive1: PartAllele
    recessive2: PartAllele

    def alleles(self) -> tuple[PartAllele, PartAllele, PartAllele]:
        return (self.dominant, self.recessive1, self.recessive2)

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {slot: allele.to_dict() for slot, allele in zip(ALLELE_SLOTS, self.alleles())}


@dataclass(frozen=True)
class DecodedGenes:
    axie_class: str
    region: str
    tag: str
    body_skin: str
    pattern: TraitTriple
    color: TraitTriple
    eyes: PartGene
    ears: PartGene
    mouth: PartGene
    horn: PartGene
    back: PartGene
    tail: PartGene

    def part(self, name: str) -> PartGene:
        if name not in PART_ORDER:
            raise KeyError(f"unknown body part: {name}")
        return getattr(self, name)

    @property
    def parts(self) -> dict[str, PartGene]:
        return {name: getattr(self, name) for name in PART_ORDER}

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "class": self.axie_class,
            "region": self.region,
            "tag": self.tag,
            "body_skin": self.body_skin,
            "pattern": self.pattern.to_dict(),
            "color": self.color.to_dict(),
        }
        for name, part in self.parts.items():
            out[name] = part.to_dict()
        return out


def normalize_gene_hex(gene_hex: Any) -> str:
    """Return the 64 hex digits of a gene payload without the 0x prefix."""
    if not isinstance(gene_hex, str):
        raise InvalidGeneFormat("gene hex must be a string")
    if not GENE_HEX_RE.fullmatch(gene_hex):
        digits = gene_hex[2:] if gene_hex.startswith("0x") else gene_hex
        raise InvalidGeneFormat(
            f"gene hex must be {GENE_HEX_DIGITS} hex characters ({GENE_BITS} bits), "
            f"optionally 0x-prefixed; got {len(digits)} characters"
        )
    return gene_hex[2:] if gene_hex.startswith("0x") else gene_hex


def hex_to_binary(gene_hex: str) -> str:
    """Expand each hex digit to 4 bits, MSB first. Leading zeros are kept."""
    digits = normalize_gene_hex(gene_hex)
    return "".join(f"{int(ch, 16):04b}" for ch in digits)


def class_from_code(code_bits: str, *, default: str = DEFAULT_CLASS) -> str:
    return CLASS_CODES.get(code_bits, default)


def _decode_allele(window: str) -> PartAllele:
    class_field, part_id_field = ALLELE_LAYOUT
    return PartAllele(
        part_class=class_from_code(class_field.slice(window), default=UNKNOWN_PART_CLASS),
        part_id=str(part_id_field.read(window)),
    )


def decode_genes(gene_hex: str) -> DecodedGenes:
    bits = hex_to_binary(gene_hex)

    header: dict[str, str] = {}
    axie_class = DEFAULT_CLASS
    for field in HEADER_LAYOUT:
        if field.name == "class":
            axie_class = class_from_code(field.slice(bits))
        else:
            header[field.name] = str(field.read(bits))

    alleles: dict[str, PartAllele] = {}
    for field in PART_LAYOUT:
        alleles[field.name] = _decode_allele(field.slice(bits))

    parts = {
        part: PartGene(*(alleles[f"{part}.{slot}"] for slot in ALLELE_SLOTS))
        for part in GENE_PART_ORDER
    }
    return DecodedGenes(
        axie_class=axie_class,
        region=header["region"],
        tag=header["tag"],
        body_skin=header["body_skin"],
        pattern=TraitTriple(*(header[f"pattern.{slot}"] for slot in ALLELE_SLOTS)),
        color=TraitTriple(*(header[f"color.{slot}"] for slot in ALLELE_SLOTS)),
        **parts,
    )


def is_valid_gene(gene_hex: Any) -> bool:
    try:
        decode_genes(gene_hex)
    except InvalidGeneFormat:
        return False
    return True


def dominant_parts(genes: DecodedGenes) -> list[dict[str, str]]:
    return [
        {"part": name, "id": part.dominant.part_id, "class": part.dominant.part_class}
        for name, part in genes.parts.items()
    ]


def format_genes_for_display(genes: DecodedGenes) -> str:
    lines = [f"{row['part']}: {row['class']}" for row in dominant_parts(genes)]
    return f"Class: {genes.axie_class}\nParts:\n" + "\n".join(lines)
