"""
Services used by the Glauber analysis: I/O, centrality, histograms and the event loop.
"""
