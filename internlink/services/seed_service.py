"""Demo dataset used by local development and the seed script."""

from __future__ import annotations

import logging

from internlink.repositories.collection_store import DATA_INITIALIZED_KEY
from internlink.services.data_service import DataService

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"


def seed_mock_data(service: DataService) -> bool:
    """Create demo startups, students, internships and applications once per store."""
    store = service.store
    if store.read_scalar(DATA_INITIALIZED_KEY):
        return False

    startup1 = service.create_user({
        "email": "techgenius@example.com",
        "password": DEMO_PASSWORD,
        "userType": "startup",
        "name": "TechGenius Solutions",
        "onboardingComplete": True,
        "startupData": {
            "official_name": "TechGenius Solutions",
            "website_link": "https://techgenius.com",
            "year_of_incorporation": "2020",
            "location_city": "Bangalore",
            "founders_name": "Rahul Sharma, Priya Patel",
            "summary": "AI and machine learning products for businesses.",
            "domain": "Artificial Intelligence",
            "contact_mail": "contact@techgenius.com",
            "contact_number": "+91 9876543210",
            "logo": "/mock-logos/techgenius.png",
        },
    })
    startup2 = service.create_user({
        "email": "greenenergy@example.com",
        "password": DEMO_PASSWORD,
        "userType": "startup",
        "name": "GreenEnergy Innovations",
        "onboardingComplete": True,
        "startupData": {
            "official_name": "GreenEnergy Innovations",
            "website_link": "https://greenenergy.com",
            "year_of_incorporation": "2019",
            "location_city": "Mumbai",
            "founders_name": "Amit Kumar, Neha Singh",
            "summary": "Solar panel technology for the renewable energy sector.",
            "domain": "Renewable Energy",
            "contact_mail": "info@greenenergy.com",
            "contact_number": "+91 8765432109",
            "logo": "/mock-logos/greenenergy.png",
        },
    })

    student1 = service.create_user({
        "email": "rahul@example.com",
        "password": DEMO_PASSWORD,
        "userType": "student",
        "name": "Rahul Sharma",
        "onboardingComplete": True,
        "studentData": {
            "college": "BITS Pilani",
            "degree": "B.Tech",
            "year": "3",
            "skills": ["React", "Node.js", "Python"],
            "bio": "Passionate about web development and AI.",
        },
    })
    student2 = service.create_user({
        "email": "priya@example.com",
        "password": DEMO_PASSWORD,
        "userType": "student",
        "name": "Priya Patel",
        "onboardingComplete": True,
        "studentData": {
            "college": "BITS Pilani",
            "degree": "M.Tech",
            "year": "1",
            "skills": ["Data Science", "Machine Learning", "Python"],
            "bio": "Aspiring data scientist.",
        },
    })

    frontend = service.create_internship({
        "startupId": startup1.id,
        "title": "Frontend Developer Intern",
        "description": "Build product interfaces with our frontend team.",
        "location": "Remote",
        "type": "Full-time",
        "duration": "3 months",
        "stipend": "₹20,000/month",
        "skills": ["React", "JavaScript", "HTML", "CSS"],
        "industry": "Technology",
        "status": "active",
    })
    service.create_internship({
        "startupId": startup1.id,
        "title": "Backend Developer Intern",
        "description": "Develop robust APIs and services.",
        "location": "Bangalore",
        "type": "Full-time",
        "duration": "6 months",
        "stipend": "₹25,000/month",
        "skills": ["Node.js", "Express", "MongoDB"],
        "industry": "Technology",
        "status": "active",
    })
    analyst = service.create_internship({
        "startupId": startup2.id,
        "title": "Data Analyst Intern",
        "description": "Analyze energy usage data to derive insights.",
        "location": "Remote",
        "type": "Part-time",
        "duration": "3 months",
        "stipend": "₹15,000/month",
        "skills": ["Python", "SQL", "Data Visualization"],
        "industry": "Energy",
        "status": "active",
    })

    service.create_application({
        "studentId": student1.id,
        "internshipId": frontend.id,
        "status": "pending",
        "coverLetter": "I am excited to apply for the Frontend Developer position.",
    })
    service.create_application({
        "studentId": student2.id,
        "internshipId": analyst.id,
        "status": "pending",
        "coverLetter": "I am interested in the Data Analyst position.",
    })

    store.write_scalar(DATA_INITIALIZED_KEY, "true")
    logger.info("Seeded demo data")
    return True
