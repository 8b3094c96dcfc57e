PACKAGE_VERSION = '1.0.0'  # version of the library as a whole
