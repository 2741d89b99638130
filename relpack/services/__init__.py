"""Application services for relpack.

Services implement the packaging pipeline, coordinating between the release
model (release/) and the platform layer (platform/).
"""
