"""Score math: overall score, letter grades and crawl-to-crawl deltas."""
