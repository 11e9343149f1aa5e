"""
Requirements Analyzer
Turns a Confluence page into requirement text and a three-part LLM analysis.
"""
