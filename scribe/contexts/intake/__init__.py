"""
Intake Context

Responsibilities:
- Wraps AI-generated text in an immutable RawDocument (kind, language, country)
- Normalizes markup artifacts out of each line
- Classifies every non-blank line into exactly one structural role
- Extracts contact fields from free text

Owns: Line normalization and classification, locale cue tables
Never: Groups lines into sections or decides layout
"""
