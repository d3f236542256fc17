"""Shared Kernel module.

Components shared by every reconciliation context: the object store
contract and the observation context carried by domain probes. Changes here
affect all contexts and should be coordinated.
"""
