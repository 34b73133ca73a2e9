"""bootsweep - reclaim /boot space and keep the GRUB default entry bootable."""

__version__ = "0.3.0"
