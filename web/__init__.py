"""
BearWatch Web Layer.

Flask application factory and blueprints. Business logic lives in core/.
"""
