"""RSS feed builder for the arpeggio's blog."""
