"""Merging of previously serialized annotation documents."""

from annodb.merge.merger import MergePass
from annodb.merge.signature_parser import ParsedSignature, fix_parameter_string, parse_signature

__all__ = ["MergePass", "ParsedSignature", "fix_parameter_string", "parse_signature"]
