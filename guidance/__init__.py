"""
Career guidance for Namibian secondary school students: program matching,
document analysis and AI career advice.
"""
