"""
Package core.tokenization - Token counting pipeline.

Modules:
- types: ChatMessage, RenderContext
- resource: Tokenizer singleton (build-once) + encode
- template: Chat template renderer (Jinja2 sandbox)
"""
