"""Normalization adapters - Model-free implementations of NormalizerPort."""

from .rule_based import RuleBasedNormalizer, fold_ascii

__all__ = ["RuleBasedNormalizer", "fold_ascii"]
