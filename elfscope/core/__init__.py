"""
Elfscope Core
=============

Error taxonomy, report models and the inspection engine.
"""
