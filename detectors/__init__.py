"""
Detection pipeline building blocks: interfaces and their concrete services.
"""
