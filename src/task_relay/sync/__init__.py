"""
Inbound sync: change log, watermark, synchronizer and the periodic sync loop.
"""
