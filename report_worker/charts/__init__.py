"""Chart layout engine.

Layout functions turn data into backend-neutral vector primitives; renderers
convert the primitives into their own drawing objects.
"""
