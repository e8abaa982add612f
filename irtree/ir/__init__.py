"""Intermediate Representation (IR) models for component trees."""

from irtree.ir.lib import (
    IR_VERSION,
    DocumentMeta,
    IRDocument,
    IRNode,
    TreeContractError,
    export_json_schema,
)

__all__ = [
    # Core models
    "IRNode",
    "IRDocument",
    "DocumentMeta",
    "IR_VERSION",
    # Errors
    "TreeContractError",
    # Schema export
    "export_json_schema",
]
