"""
Armazenamento de Documentos
Chave -> JSON serializado, por usuário
Backends: memória, arquivos JSON locais e Supabase
"""

import json
import os
import shutil
from datetime import datetime
from typing import Any, Dict, Optional

import streamlit as st
from supabase import create_client, Client

from config import DATA_DIR, TABELA_DOCUMENTOS

# ============================================
# SUPABASE - Conexão com banco de dados
# ============================================

# Singleton para não abrir um client por requisição
_supabase_client = None

def _conectar_supabase() -> Optional[Client]:
    """Conecta ao Supabase com as credenciais de .streamlit/secrets.toml"""
    global _supabase_client

    if _supabase_client is not None:
        return _supabase_client

    try:
        url = st.secrets["supabase"]["url"]
        key = st.secrets["supabase"]["key"]
        _supabase_client = create_client(url, key)
        print("[SUPABASE] ✅ Conectado (singleton)!")
        return _supabase_client
    except Exception as e:
        print(f"[SUPABASE] ⚠️ Supabase não configurado: {e}")
        return None


# ============================================
# INTERFACE
# ============================================

class ArmazenamentoBase:
    """
    Repositório chave-valor de documentos.
    Os valores são texto JSON, como gravado pelo app web.
    """

    def obter(self, chave: str) -> Optional[str]:
        raise NotImplementedError

    def salvar(self, chave: str, texto: str) -> bool:
        raise NotImplementedError

    def remover(self, chave: str) -> bool:
        raise NotImplementedError

    # ---- helpers JSON ----

    def carregar_json(self, chave: str, padrao: Any = None) -> Any:
        """
        Lê e decodifica o documento. Ausente ou JSON inválido retornam `padrao`.
        """
        texto = self.obter(chave)
        if texto is None or texto == "":
            return padrao
        try:
            return json.loads(texto)
        except (TypeError, ValueError) as e:
            print(f"[LOAD] ❌ JSON inválido em '{chave}': {e}")
            return padrao

    def salvar_json(self, chave: str, dados: Any) -> bool:
        return self.salvar(chave, json.dumps(dados, ensure_ascii=False))

    def carregar_lista(self, chave: str) -> list:
        dados = self.carregar_json(chave, [])
        if not isinstance(dados, list):
            print(f"[LOAD] ⚠️ '{chave}' não é uma lista, ignorando")
            return []
        return dados

    def carregar_mapa(self, chave: str) -> Dict:
        dados = self.carregar_json(chave, {})
        if not isinstance(dados, dict):
            print(f"[LOAD] ⚠️ '{chave}' não é um objeto, ignorando")
            return {}
        return dados


class ArmazenamentoMemoria(ArmazenamentoBase):
    """Documentos em um dict (testes e scripts)"""

    def __init__(self, documentos: Dict[str, str] = None):
        self.documentos = dict(documentos or {})

    def obter(self, chave: str) -> Optional[str]:
        return self.documentos.get(chave)

    def salvar(self, chave: str, texto: str) -> bool:
        self.documentos[chave] = texto
        return True

    def remover(self, chave: str) -> bool:
        self.documentos.pop(chave, None)
        return True


# ============================================
# JSON LOCAL
# ============================================

def _salvar_json_seguro(path: str, texto: str):
    """
    Grava o arquivo de forma atômica: escreve em .tmp, guarda a versão
    anterior em .bak e só então substitui o original.
    """
    os.makedirs(os.path.dirname(path), exist_ok=True)
    tmp_path = f"{path}.tmp"
    with open(tmp_path, 'w', encoding='utf-8') as f:
        f.write(texto)
    if os.path.exists(path):
        shutil.copy2(path, f"{path}.bak")
    os.replace(tmp_path, path)


class ArmazenamentoJson(ArmazenamentoBase):
    """Um arquivo .json por chave em data/usuarios/<usuario>/"""

    def __init__(self, usuario_id: str = "local", data_dir: str = None):
        self.data_dir = os.path.join(str(data_dir or DATA_DIR), "usuarios", usuario_id)
        self._garantir_diretorio()

    def _garantir_diretorio(self):
        os.makedirs(self.data_dir, exist_ok=True)

    def _path(self, chave: str) -> str:
        return os.path.join(self.data_dir, f"{chave}.json")

    def obter(self, chave: str) -> Optional[str]:
        path = self._path(chave)
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except OSError as e:
            print(f"[LOAD] ❌ Erro ao ler {path}: {e}")
            return None

    def salvar(self, chave: str, texto: str) -> bool:
        path = self._path(chave)
        try:
            _salvar_json_seguro(path, texto)
            print(f"[SAVE] JSON local salvo: {path}")
            return True
        except OSError as e:
            print(f"[SAVE] ❌ Erro ao salvar localmente: {e}")
            return False

    def remover(self, chave: str) -> bool:
        path = self._path(chave)
        if os.path.exists(path):
            try:
                os.remove(path)
            except OSError as e:
                print(f"[SAVE] ❌ Erro ao remover {path}: {e}")
                return False
        return True


# ============================================
# SUPABASE
# ============================================

class ArmazenamentoSupabase(ArmazenamentoBase):
    """
    Documentos na tabela `documentos` (user_id, chave, valor, updated_at).
    Uma linha por usuário e chave; `valor` guarda o texto JSON.
    """

    def __init__(self, usuario_id: str, supabase: Client = None):
        self.usuario_id = usuario_id
        self.supabase = supabase if supabase is not None else _conectar_supabase()

    def _tabela(self):
        return self.supabase.table(TABELA_DOCUMENTOS)

    def obter(self, chave: str) -> Optional[str]:
        if not self.supabase:
            return None
        try:
            response = self._tabela().select("valor").eq(
                "user_id", self.usuario_id
            ).eq("chave", chave).execute()
            if response.data:
                return response.data[0].get("valor")
            return None
        except Exception as e:
            print(f"[LOAD] ❌ Erro ao carregar '{chave}' do Supabase: {e}")
            return None

    def salvar(self, chave: str, texto: str) -> bool:
        if not self.supabase:
            print("[SAVE] ⚠️ Supabase não configurado")
            return False
        try:
            self._tabela().upsert({
                "user_id": self.usuario_id,
                "chave": chave,
                "valor": texto,
                "updated_at": datetime.now().isoformat(),
            }, on_conflict="user_id,chave").execute()
            return True
        except Exception as e:
            print(f"[SAVE] ❌ Erro ao salvar '{chave}' no Supabase: {e}")
            return False

    def remover(self, chave: str) -> bool:
        if not self.supabase:
            return False
        try:
            self._tabela().delete().eq("user_id", self.usuario_id).eq("chave", chave).execute()
            return True
        except Exception as e:
            print(f"[SAVE] ❌ Erro ao remover '{chave}' do Supabase: {e}")
            return False


def criar_armazenamento(usuario_id: str = "local") -> ArmazenamentoBase:
    """Supabase quando configurado; senão JSON local em data/"""
    supabase = _conectar_supabase()
    if supabase:
        return ArmazenamentoSupabase(usuario_id, supabase)
    return ArmazenamentoJson(usuario_id)
