"""
Canvas interaction: viewport transforms, drag gestures, the read-only
viewer and the editable flow builder.
"""
