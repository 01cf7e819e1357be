"""
Services Layer

Pure fixture and bracket logic that:
- Accepts plain inputs (team IDs, match lists, format config)
- Returns plain outputs (match lists, bracket structures, standings tables)
- Does NOT perform storage or network I/O
- Does NOT depend on HTTP request/response objects
"""
