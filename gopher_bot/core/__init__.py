"""Platform-independent message classification: rules, dispatch, channels.

Nothing in this package imports slack-bolt or performs I/O, so every
matching decision can be tested with plain data.
"""
