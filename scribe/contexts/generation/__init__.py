"""
Generation Context

Responsibilities:
- Adapts LLM providers to the async generate(prompt, context) collaborator
- Wraps whatever the collaborator returns in a RawDocument
- Hands drafts to a caller-supplied DocumentStore

Owns: Provider selection, retries, the storage interface
Never: Builds prompts, parses documents or renders output
"""
