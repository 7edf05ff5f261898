"""
External HTTP services used by the guidance API (OCR and advisory matching).
"""
