"""
devscan - Hardware Device Inventory for Video I/O Devices

Enumerates attached devices through a driver layer, keeps a lock-protected
snapshot of their capabilities, resolves devices by index, id, name, serial
number or free-form argument, and reports hot-plug changes.
"""

__version__ = "1.0.0"
__author__ = "devscan Team"
