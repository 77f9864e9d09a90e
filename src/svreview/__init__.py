"""
review support for structural variant calls: clustering of redundant calls and persistence of reviewer decisions
"""
__version__ = '0.1.0'
