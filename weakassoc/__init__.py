"""weakassoc - infer weak associations (undeclared foreign keys) in relational schemas."""

__version__ = "0.1.0"
