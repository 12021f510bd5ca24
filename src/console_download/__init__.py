"""Install the kamel CLI download link into the OpenShift web console."""

__version__ = "0.1.0"
