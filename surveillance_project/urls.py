"""
URL configuration for surveillance_project project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.0/topics/http/urls/
"""
from django.urls import path, include

urlpatterns = [
    # Survey modules
    path('indices/', include('apps.indices.urls')),

    # REST API
    path('api/', include('apps.api.urls')),
]
