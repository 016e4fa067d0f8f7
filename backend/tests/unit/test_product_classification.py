"""Unit tests for product type classifiers"""

from decimal import Decimal

import pytest

from domain.catalog import (
    AttributeClassifier,
    NameHeuristicClassifier,
    Product,
    ProductType,
)


def named(name, product_type=None):
    return Product(id=name, name=name, price=Decimal("10.00"), stock=1, product_type=product_type)


class TestNameHeuristicClassifier:

    @pytest.mark.parametrize("name, expected", [
        ("Python Course", ProductType.DIGITAL),
        ("Ebook de Receitas", ProductType.DIGITAL),
        ("Curso de Violao", ProductType.DIGITAL),
        ("Consultoria Tecnica", ProductType.SERVICE),
        ("Aula particular", ProductType.SERVICE),
        ("Wireless Mouse", ProductType.PHYSICAL),
    ])
    def test_classifies_by_name_tokens(self, name, expected):
        assert NameHeuristicClassifier().classify(named(name)) == expected

    def test_matches_whole_words_only(self):
        # "Discourse" contains "course" but is not a course
        assert NameHeuristicClassifier().classify(named("Discourse Speaker")) == ProductType.PHYSICAL

    def test_digital_wins_over_service(self):
        assert NameHeuristicClassifier().classify(named("Digital Service Pack")) == ProductType.DIGITAL

    def test_custom_tokens(self):
        classifier = NameHeuristicClassifier(digital_tokens={"license"}, service_tokens={"repair"})
        assert classifier.classify(named("Software License")) == ProductType.DIGITAL
        assert classifier.classify(named("Phone Repair")) == ProductType.SERVICE
        assert classifier.classify(named("Python Course")) == ProductType.PHYSICAL


class TestAttributeClassifier:

    def test_stored_type_wins(self):
        product = named("Python Course", product_type=ProductType.PHYSICAL)
        assert AttributeClassifier().classify(product) == ProductType.PHYSICAL

    def test_falls_back_to_name(self):
        assert AttributeClassifier().classify(named("Python Course")) == ProductType.DIGITAL

    def test_classify_all(self):
        products = [named("Python Course"), named("Mouse", product_type=ProductType.SERVICE)]
        assert AttributeClassifier().classify_all(products) == {
            "Python Course": ProductType.DIGITAL,
            "Mouse": ProductType.SERVICE,
        }
