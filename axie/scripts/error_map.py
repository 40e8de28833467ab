"""Stable error codes emitted in axie wrapper envelopes."""

from __future__ import annotations

ERR_INVALID_REQUEST = "INVALID_REQUEST"
ERR_INVALID_GENE_FORMAT = "INVALID_GENE_FORMAT"
ERR_INVALID_CLASS = "INVALID_CLASS"
ERR_INVALID_AXIE_ID = "INVALID_AXIE_ID"
ERR_INVALID_BREEDING_RECORD = "INVALID_BREEDING_RECORD"
ERR_TABLES_INVALID = "TABLES_INVALID"
ERR_INTERNAL = "INTERNAL_ERROR"

EXIT_CODE_BY_ERROR = {
    ERR_INVALID_REQUEST: 2,
    ERR_INVALID_GENE_FORMAT: 2,
    ERR_INVALID_CLASS: 2,
    ERR_INVALID_AXIE_ID: 2,
    ERR_INVALID_BREEDING_RECORD: 2,
    ERR_TABLES_INVALID: 1,
    ERR_INTERNAL: 1,
}


def exit_code_for(error_code: str) -> int:
    return EXIT_CODE_BY_ERROR.get(error_code, 1)
