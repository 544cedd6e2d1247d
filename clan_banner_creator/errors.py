class BannerError(Exception):
    pass


class AssetNotFoundError(BannerError):
    """No record in `table` matches the requested id."""

    def __init__(self, table, id):
        super().__init__(f'No record with id {id} in {table}')
        self.table = table
        self.id = id


class MalformedRecordError(BannerError):
    pass
