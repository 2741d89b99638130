"""relpack: package assembled Erlang/OTP releases into tarballs."""

__version__ = "0.1.0"
