from .plotter import plot_design, summarize_filters

__all__ = ["plot_design", "summarize_filters"]
