"""Assistance categories and the closed choice sets their entries draw from."""

from __future__ import annotations

from enum import StrEnum


class Category(StrEnum):
    """The eight assistance-entry collections tracked by the dashboard."""

    DIAPERS = "diapers"
    DONATIONS_GIVEN = "donations_given"
    DONATIONS_RECEIVED = "donations_received"
    BUS_PASSES = "bus_passes"
    RIDESHARE = "rideshare"
    WATER = "water"
    ELECTRIC = "electric"
    RENT = "rent"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]

    @property
    def color(self) -> str:
        return CATEGORY_COLORS[self]


class DiaperSize(StrEnum):
    PREEMIE = "Preemie"
    NEWBORN = "Newborn"
    SIZE_1 = "Size 1"
    SIZE_2 = "Size 2"
    SIZE_3 = "Size 3"
    SIZE_4 = "Size 4"
    SIZE_5 = "Size 5"
    SIZE_6 = "Size 6"
    SIZE_7 = "Size 7"
    PULL_UPS_2T_3T = "Pull-Ups 2T-3T"
    PULL_UPS_3T_4T = "Pull-Ups 3T-4T"


class DonationItem(StrEnum):
    DIAPERS = "Diapers"
    WIPES = "Wipes"
    FORMULA = "Formula"
    BABY_FOOD = "Baby Food"
    CLOTHING = "Clothing"
    SHOES = "Shoes"
    CAR_SEAT = "Car Seat"
    STROLLER = "Stroller"
    CRIB = "Crib"
    HYGIENE_PRODUCTS = "Hygiene Products"
    SCHOOL_SUPPLIES = "School Supplies"
    FOOD = "Food"
    OTHER = "Other"


class BusPassType(StrEnum):
    SINGLE_RIDE = "Single Ride"
    DAY_PASS = "Day Pass"
    SEVEN_DAY = "7-Day Pass"
    THIRTY_ONE_DAY = "31-Day Pass"
    REDUCED_FARE = "Reduced Fare"


class ElectricProvider(StrEnum):
    ENTERGY = "Entergy"
    CLECO = "Cleco"
    DEMCO = "DEMCO"
    SLEMCO = "SLEMCO"
    OTHER = "Other"


class WaterProvider(StrEnum):
    BATON_ROUGE_WATER = "Baton Rouge Water Company"
    PARISH_UTILITIES = "Parish Utilities"
    CITY_OF_BAKER = "City of Baker"
    OTHER = "Other"


class RidePurpose(StrEnum):
    EMPLOYMENT = "Employment"
    JOB_INTERVIEW = "Job Interview"
    MEDICAL_APPOINTMENT = "Medical Appointment"
    COURT_DATE = "Court Date"
    CLASS_ATTENDANCE = "Class Attendance"
    CHILD_VISITATION = "Child Visitation"
    OTHER = "Other"


CATEGORY_LABELS: dict[Category, str] = {
    Category.DIAPERS: "Diapers",
    Category.DONATIONS_GIVEN: "Donations Given",
    Category.DONATIONS_RECEIVED: "In-Kind Donations Received",
    Category.BUS_PASSES: "Bus Passes",
    Category.RIDESHARE: "Rideshare",
    Category.WATER: "Water",
    Category.ELECTRIC: "Electric",
    Category.RENT: "Rent",
}

CATEGORY_COLORS: dict[Category, str] = {
    Category.DIAPERS: "#3B82F6",
    Category.DONATIONS_GIVEN: "#22C55E",
    Category.DONATIONS_RECEIVED: "#14B8A6",
    Category.BUS_PASSES: "#A855F7",
    Category.RIDESHARE: "#EC4899",
    Category.WATER: "#0EA5E9",
    Category.ELECTRIC: "#F97316",
    Category.RENT: "#EAB308",
}
