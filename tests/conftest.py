# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Pytest configuration and fixtures."""

import pytest

from genro_toolbox import reset_smartasync_cache

from genro_wsdl import WsdlCatalog

USERS_WSDL = """\
<?xml version="1.0" encoding="UTF-8"?>
<wsdl:definitions xmlns:wsdl="http://schemas.xmlsoap.org/wsdl/"
    xmlns:soap="http://schemas.xmlsoap.org/wsdl/soap/"
    xmlns:xs="http://www.w3.org/2001/XMLSchema"
    xmlns:tns="http://example.com/users"
    xmlns:ext="http://example.com/ext"
    targetNamespace="http://example.com/users">
  <wsdl:types>
    <xs:schema targetNamespace="http://example.com/users">
      <xs:element name="GetUser">
        <xs:complexType>
          <xs:sequence>
            <xs:element name="id" type="xs:string"/>
          </xs:sequence>
        </xs:complexType>
      </xs:element>
      <xs:element name="GetUserResponse">
        <xs:complexType>
          <xs:sequence>
            <xs:element name="user" type="tns:User"/>
          </xs:sequence>
        </xs:complexType>
      </xs:element>
      <xs:complexType name="User">
        <xs:sequence>
          <xs:element name="name" type="xs:string"/>
          <xs:element name="email" type="xs:string" minOccurs="0"/>
          <xs:element name="address" type="tns:Address" minOccurs="0"/>
        </xs:sequence>
        <xs:attribute name="id" type="xs:string"/>
        <xs:attributeGroup ref="tns:Audit"/>
      </xs:complexType>
      <xs:complexType name="Address">
        <xs:sequence>
          <xs:element name="street" type="xs:string"/>
          <xs:element name="city" type="xs:string"/>
        </xs:sequence>
      </xs:complexType>
      <xs:attributeGroup name="Audit">
        <xs:attribute name="created" type="xs:dateTime"/>
        <xs:attribute ref="tns:owner"/>
      </xs:attributeGroup>
      <xs:attribute name="owner" type="xs:string" use="optional"/>
      <xs:element name="ListUsers">
        <xs:complexType>
          <xs:sequence>
            <xs:element ref="tns:Filter"/>
            <xs:element ref="ext:Paging" minOccurs="0"/>
          </xs:sequence>
        </xs:complexType>
      </xs:element>
      <xs:element name="Filter">
        <xs:complexType>
          <xs:sequence>
            <xs:element name="role" type="xs:string" maxOccurs="unbounded"/>
          </xs:sequence>
        </xs:complexType>
      </xs:element>
      <xs:element name="Paging">
        <xs:complexType>
          <xs:sequence>
            <xs:element name="size" type="xs:int"/>
          </xs:sequence>
          <xs:attribute name="page" type="xs:int"/>
        </xs:complexType>
      </xs:element>
      <xs:element name="ListUsersResponse">
        <xs:complexType>
          <xs:sequence>
            <xs:element name="user" type="tns:User" minOccurs="0" maxOccurs="unbounded"/>
          </xs:sequence>
        </xs:complexType>
      </xs:element>
      <xs:element name="Ping">
        <xs:complexType/>
      </xs:element>
      <xs:element name="Token" type="xs:string"/>
      <xs:simpleType name="Code">
        <xs:restriction base="xs:string"/>
      </xs:simpleType>
    </xs:schema>
  </wsdl:types>
  <wsdl:message name="GetUserRequest">
    <wsdl:part name="parameters" element="tns:GetUser"/>
  </wsdl:message>
  <wsdl:message name="GetUserResponse">
    <wsdl:part name="parameters" element="tns:GetUserResponse"/>
  </wsdl:message>
  <wsdl:message name="ListUsersRequest">
    <wsdl:part name="parameters" element="tns:ListUsers"/>
  </wsdl:message>
  <wsdl:message name="ListUsersResponse">
    <wsdl:part name="parameters" element="tns:ListUsersResponse"/>
  </wsdl:message>
  <wsdl:message name="LoginRequest">
    <wsdl:part name="username" type="xs:string"/>
    <wsdl:part name="password" type="xs:string"/>
  </wsdl:message>
  <wsdl:message name="LoginResponse">
    <wsdl:part name="token" type="xs:string"/>
  </wsdl:message>
  <wsdl:message name="PingRequest">
    <wsdl:part name="parameters" element="tns:Ping"/>
  </wsdl:message>
  <wsdl:portType name="UserPort">
    <wsdl:operation name="ListUsers">
      <wsdl:input message="tns:ListUsersRequest"/>
      <wsdl:output message="tns:ListUsersResponse"/>
    </wsdl:operation>
    <wsdl:operation name="GetUser">
      <wsdl:input message="tns:GetUserRequest"/>
      <wsdl:output message="tns:GetUserResponse"/>
    </wsdl:operation>
    <wsdl:operation name="Login">
      <wsdl:input message="tns:LoginRequest"/>
      <wsdl:output message="tns:LoginResponse"/>
    </wsdl:operation>
    <wsdl:operation name="Ping">
      <wsdl:input message="tns:PingRequest"/>
    </wsdl:operation>
  </wsdl:portType>
  <wsdl:binding name="UserBinding" type="tns:UserPort">
    <soap:binding style="document" transport="http://schemas.xmlsoap.org/soap/http"/>
    <wsdl:operation name="Ping">
      <soap:operation soapAction="Ping"/>
    </wsdl:operation>
    <wsdl:operation name="Login">
      <soap:operation soapAction="Login"/>
    </wsdl:operation>
    <wsdl:operation name="ListUsers">
      <soap:operation soapAction="ListUsers"/>
    </wsdl:operation>
    <wsdl:operation name="GetUser">
      <soap:operation soapAction="GetUser"/>
    </wsdl:operation>
  </wsdl:binding>
</wsdl:definitions>
"""


@pytest.fixture
def wsdl_text():
    return USERS_WSDL


@pytest.fixture
def catalog():
    return WsdlCatalog(USERS_WSDL)


@pytest.fixture
def wsdl_file(tmp_path):
    """Write the sample WSDL to disk."""
    path = tmp_path / "users.wsdl"
    path.write_text(USERS_WSDL)
    return path


@pytest.fixture(autouse=True)
def reset_smartasync_caches():
    """Reset smartasync cache before each test.

    Async context detection starts fresh for each test, preventing state
    leakage between sync and async tests.
    """
    reset_smartasync_cache()
    yield
