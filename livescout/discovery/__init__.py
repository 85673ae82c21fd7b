"""
Live-stream discovery: HTML extraction, item parsing, category matching,
concurrent scraping and ranking.
"""
