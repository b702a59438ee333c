"""
Algorithm layer: the MOEA/D loop and its configurable components.

The loop lives in `compmoead.engine.algorithm.moead`; every interchangeable
part of it lives in `compmoead.engine.algorithm.components`.
"""
