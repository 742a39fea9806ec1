"""Click commands registered on the ``requirekit`` group."""
