"""
Demo Service package.

Single-process variant that exercises every instrument kind under the
`app.*` namespace.
"""
