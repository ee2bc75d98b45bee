# Avoid eager imports; submodules are imported where needed.
