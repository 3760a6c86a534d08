"""
Core — Tree walking and child classification

- Nodes: node kinds and per-walk context
- Members: object member enumeration with visibility tags
- Classifier: label/branch decision for each child
- Walker: the recursive renderer
"""
