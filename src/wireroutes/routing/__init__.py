"""Routing: route tree model, path composition and the tree compiler.

Routes are declared as a nested tree and compiled once into flat
registrations against an express-style host.
"""
