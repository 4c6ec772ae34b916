from rest_framework import serializers
from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.db import IntegrityError

from .models import User
from utils.image_opt import process_uploaded_file

import logging

logger = logging.getLogger("rest_framework")


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(
        write_only=True,
        min_length=8,
        required=True,
        error_messages={
            "min_length": "Password must be at least 8 characters long.",
        }
    )

    class Meta:
        model = User
        fields = ('id', 'username', 'email', 'password', 'user_type', 'bio', 'phone', 'website')
        read_only_fields = ('id',)

    def validate_email(self, value):
        value = value.lower()
        if User.objects.filter(email=value).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value

    def validate_password(self, value):
        validate_password(value)
        return value

    def create(self, validated_data):
        try:
            user = User.objects.create_user(
                email=validated_data['email'],
                password=validated_data['password'],
                username=validated_data['username'],
                user_type=validated_data.get('user_type', User.USER),
                bio=validated_data.get('bio', ''),
                phone=validated_data.get('phone', ''),
                website=validated_data.get('website', ''),
            )
            logger.info(f"User {user.email} created successfully.")
            return user
        except IntegrityError as ie:
            logger.error(f"Integrity error for {validated_data.get('email')}: {str(ie)}")
            raise serializers.ValidationError({"detail": "This email or username already exists."})


class LoginUserSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True)
    password = serializers.CharField(write_only=True, required=True)

    def validate(self, attrs):
        email = attrs.get('email').lower()
        password = attrs.get('password')

        user = authenticate(email=email, password=password)
        if not user:
            raise serializers.ValidationError(
                {"detail": "Invalid email or password."}
            )
        attrs['user'] = user  # Pass the authenticated user to the view
        return attrs


class ProfileSerializer(serializers.ModelSerializer):
    """
    Serializer for viewing and updating the current user's profile.
    """
    avatar_url = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'user_type', 'is_verified', 'bio',
            'avatar', 'avatar_url', 'phone', 'website', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'user_type', 'is_verified', 'created_at', 'updated_at']
        extra_kwargs = {'avatar': {'write_only': True, 'required': False}}

    def get_avatar_url(self, obj) -> str:
        return obj.avatar_url

    def validate_email(self, value):
        value = value.lower()
        if User.objects.filter(email=value).exclude(pk=self.instance.pk).exists():
            raise serializers.ValidationError("Email is already in use by another account.")
        return value

    def validate_avatar(self, avatar):
        if not avatar:
            return None
        return process_uploaded_file(avatar)
