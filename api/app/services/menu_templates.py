"""Starter menu templates for quick-start menu creation."""

from __future__ import annotations

from dataclasses import dataclass, field

from app.schema.menu import MenuCreate, MenuItemInput, MenuSectionInput

DEFAULT_TEMPLATE_ID = "coffee-shop-basic"


@dataclass(frozen=True)
class TemplateItem:
    name: str
    description: str
    price: float


@dataclass(frozen=True)
class TemplateSection:
    name: str
    description: str
    items: tuple[TemplateItem, ...]


@dataclass(frozen=True)
class MenuTemplate:
    """Scaffold for a new menu; kept small so the editor stays manageable."""
    id: str
    label: str
    description: str
    menu_name: str
    restaurant_name: str
    menu_description: str
    sections: tuple[TemplateSection, ...]
    tags: tuple[str, ...] = field(default_factory=tuple)

    def build(self, currency: str | None = None) -> MenuCreate:
        """Materialize the template as a menu creation payload."""
        return MenuCreate(
            name=self.menu_name,
            restaurant_name=self.restaurant_name,
            description=self.menu_description,
            currency=currency or "USD",
            sections=[
                MenuSectionInput(
                    name=section.name,
                    description=section.description,
                    items=[
                        MenuItemInput(name=item.name, description=item.description, price=item.price)
                        for item in section.items
                    ],
                )
                for section in self.sections
            ],
        )


MENU_TEMPLATES: tuple[MenuTemplate, ...] = (
    MenuTemplate(
        id="coffee-shop-basic",
        label="Coffee Shop",
        description="Espresso drinks and pastries starter layout.",
        menu_name="Daily Menu",
        restaurant_name="Your Coffee Bar",
        menu_description="Freshly brewed coffee and artisan pastries.",
        tags=("coffee", "cafe", "breakfast"),
        sections=(
            TemplateSection(
                name="Drinks",
                description="Signature espresso & classics",
                items=(
                    TemplateItem("Espresso", "Rich double shot", 3.5),
                    TemplateItem("Latte", "Smooth with microfoam", 4.75),
                    TemplateItem("Cold Brew", "Slow steeped 18h", 4.5),
                ),
            ),
            TemplateSection(
                name="Pastries",
                description="Baked fresh each morning",
                items=(
                    TemplateItem("Croissant", "Buttery & flaky", 3.95),
                    TemplateItem("Blueberry Muffin", "Seasonal berries", 3.25),
                ),
            ),
        ),
    ),
    MenuTemplate(
        id="casual-dining-basic",
        label="Casual Dining",
        description="Starters, mains and desserts foundation.",
        menu_name="Main Menu",
        restaurant_name="Your Kitchen",
        menu_description="Comfort food favorites crafted daily.",
        tags=("restaurant", "lunch", "dinner"),
        sections=(
            TemplateSection(
                name="Starters",
                description="To begin",
                items=(
                    TemplateItem("House Salad", "Seasonal greens & vinaigrette", 9.5),
                    TemplateItem("Bruschetta", "Tomato, basil, olive oil", 8.0),
                ),
            ),
            TemplateSection(
                name="Mains",
                description="Hearty plates",
                items=(
                    TemplateItem("Grilled Chicken", "Herb marinade, roasted veggies", 18.0),
                    TemplateItem("Pasta Primavera", "Seasonal vegetables & parmesan", 17.5),
                ),
            ),
            TemplateSection(
                name="Desserts",
                description="Sweet finish",
                items=(TemplateItem("Chocolate Cake", "Dark ganache & cream", 7.5),),
            ),
        ),
    ),
    MenuTemplate(
        id="italian-trattoria",
        label="Italian Trattoria",
        description="Classic pasta, pizza and antipasti starter set.",
        menu_name="Trattoria Menu",
        restaurant_name="Your Trattoria",
        menu_description="Authentic Italian flavors with fresh ingredients.",
        tags=("italian", "pasta", "pizza"),
        sections=(
            TemplateSection(
                name="Antipasti",
                description="To begin",
                items=(
                    TemplateItem("Bruschetta al Pomodoro", "Tomato, basil, EVOO", 8.5),
                    TemplateItem("Caprese", "Mozzarella, tomato, basil", 11.0),
                ),
            ),
            TemplateSection(
                name="Primi",
                description="Pastas",
                items=(
                    TemplateItem("Spaghetti Carbonara", "Pecorino & guanciale", 18.0),
                    TemplateItem("Tagliatelle al Ragu", "Slow beef ragu", 19.0),
                ),
            ),
            TemplateSection(
                name="Pizza",
                description="Wood-fired",
                items=(
                    TemplateItem("Margherita", "Fior di latte, basil", 16.0),
                    TemplateItem("Diavola", "Spicy salami", 17.5),
                ),
            ),
        ),
    ),
)

_TEMPLATES_BY_ID = {template.id: template for template in MENU_TEMPLATES}


def get_template(template_id: str | None) -> MenuTemplate | None:
    if not template_id:
        return None
    return _TEMPLATES_BY_ID.get(template_id)


def list_templates() -> list[MenuTemplate]:
    return list(MENU_TEMPLATES)
