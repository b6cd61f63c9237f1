# Domain exceptions raised by the feed service layer.
# The controller layer catches these and converts them to HTTPException.


class CityNotFoundError(Exception):
    def __init__(self, city_id: str) -> None:
        self.city_id = city_id
        super().__init__(f"City {city_id} not found")
