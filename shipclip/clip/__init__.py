"""Clipboard parsing: tokenizer, shape predicates and the field resolver."""
