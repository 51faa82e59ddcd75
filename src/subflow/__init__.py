"""Run git workflows across a repository and its submodules."""
