"""
Rendering Context

Responsibilities:
- Tags tokens for keyword emphasis
- Builds the screen view tree and its HTML page
- Lays documents out on fixed-size pages as absolute draw commands
- Paints draw commands into PDF bytes and reads them back for validation
- Derives download filenames

Owns: Style profiles, text measurement, pagination, PDF output
Never: Changes line roles or section assignment
"""
