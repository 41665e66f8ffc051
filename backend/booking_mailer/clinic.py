"""Static clinic details shared by the PDF receipt and the email body."""

NAME = "Wafa Dental Clinic"
EMAIL_BRAND_NAME = "WAFA Dental Clinic"
ADDRESS = "Office #7, 3rd Floor, The Ark Building, Markaz, I-8 Markaz, Islamabad, 44000, Pakistan"
PHONE = "+92 51 8448877"
PHONE_LINK = "tel:+92518448877"
EMAIL = "management@wafadentalclinic.com"
WEBSITE = "www.wafadentalclinic.com"
WEBSITE_URL = "https://www.wafadentalclinic.com"
LOGO_URL = "https://www.wafadentalclinic.com/images/logo.png"
MAP_URL = (
    "https://www.google.com/maps/place/WAFA+Dental+Clinic/@33.6673337,73.0747596,17z"
    "/data=!3m1!4b1!4m6!3m5!1s0x38df957cc7644563:0x27a7ae2e6cda42ef!8m2!3d33.6673337"
    "!4d73.0747596!16s%2Fg%2F11xd1rytr0"
)

SOCIAL_LINKS = [
    ("Facebook", "https://www.facebook.com/wafadentalclinics", "https://img.icons8.com/ios-filled/50/ffffff/facebook-new.png"),
    ("Instagram", "https://www.instagram.com/wafadentalclinic.pk/", "https://img.icons8.com/ios-filled/50/ffffff/instagram-new--v1.png"),
    ("LinkedIn", "https://www.linkedin.com/company/wafa-dental-clinic/", "https://img.icons8.com/ios-filled/50/ffffff/linkedin.png"),
    ("Twitter", "https://x.com/TeamWafaDental", "https://img.icons8.com/ios-filled/50/ffffff/twitterx--v1.png"),
]

CONFIRMATION_SUBJECT = f"Your Appointment Confirmation with {EMAIL_BRAND_NAME}"
