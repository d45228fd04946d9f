from .csv_importer import import_xy_data, save_xy_data

__all__ = ["import_xy_data", "save_xy_data"]
